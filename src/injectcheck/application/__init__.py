"""Application layer: graph building, detectors, pipeline services, reporters."""

# Application layer

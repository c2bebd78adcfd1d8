# Infrastructure layer

# Domain layer

# Core package initialization
# Cross-cutting concerns: configuration, exceptions, logging, security and
# the HTTP helpers shared by the controllers.

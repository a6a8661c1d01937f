# Services package initialization
# Application services: validation, ownership checks and the
# sequential repository writes of each use-case.

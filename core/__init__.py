# Core package - foundational components
#
# Modules:
# - config: Application settings
# - logging: Structured logging
# - errors: Error taxonomy mapped to HTTP statuses
# - storage: Pluggable record store backends (MongoDB, PostgreSQL, memory)
# - uploads: Local disk storage for uploaded product images

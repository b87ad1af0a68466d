# Shared error, logging and tracing utilities

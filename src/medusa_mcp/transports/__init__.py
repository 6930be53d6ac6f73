"""Transport adapters for STDIO and Streamable HTTP."""

"""HTTP middleware: monitoring and error handling."""

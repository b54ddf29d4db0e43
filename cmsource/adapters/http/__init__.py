"""HTTP transport adapters implementing HttpClientPort."""

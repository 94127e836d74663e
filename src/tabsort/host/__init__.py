"""Host environment interfaces and in-memory implementations."""

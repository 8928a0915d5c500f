"""Daily budget push backend."""

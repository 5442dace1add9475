"""Controllers coordinating rounds, results and standings."""

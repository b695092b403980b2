"""Integration adapters: solved.ac HTTP, SQLite storage, and Telegram delivery."""

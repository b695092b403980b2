"""Core domain package for solvedbot.

Core contains cursor arithmetic, command parsing, and the rating poll loop
without any Telegram, HTTP, or storage-specific code, keeping the business
logic portable.
"""

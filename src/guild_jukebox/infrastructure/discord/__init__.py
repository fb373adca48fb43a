"""Discord adapters - bot, cogs, guards and voice transport."""

"""
TG Mirror

Mirrors media attachments from incoming Telegram updates into one target
chat, deduplicated by file_unique_id, and replays the history of configured
source chats in small batches. One outbound copy per scheduled tick.
"""

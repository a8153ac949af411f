from prometheus_client import Counter, Gauge


messages_sent_total = Counter("chat_messages_sent_total", "Order messages persisted", ["message_type"])
messages_marked_read_total = Counter("chat_messages_marked_read_total", "Messages flipped to read")
websocket_connections = Gauge("chat_websocket_connections", "Open order room websocket connections")

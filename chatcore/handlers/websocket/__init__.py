"""WebSocket transport: parsing, envelopes, idle lifecycle and the message loop.

The entry point is manager.handle_websocket_connection.
"""

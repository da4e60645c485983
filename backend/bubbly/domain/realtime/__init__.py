"""Real-time delivery: presence tracking and Socket.IO pushes."""

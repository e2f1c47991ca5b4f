"""VibraToDo - personal task list synced with a record store."""

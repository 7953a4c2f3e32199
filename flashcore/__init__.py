"""
flashcore - scheduling and counting core of the flashcard study app.
"""

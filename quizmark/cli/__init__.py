"""quizmark command line interface."""

"""EdTasks: role-based task manager API for students and teachers.

Students keep their own task lists; each student is linked to exactly one
teacher at signup, and that teacher can follow (but never edit) the
student's tasks alongside their own.
"""

__version__ = "0.1.0"

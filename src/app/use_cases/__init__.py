"""
Use Cases

Organized into domain folders:
- auth/: Password reset lifecycle
- study/: Quiz grading
"""

# HTTP blueprints; registered in parallax/__init__.py

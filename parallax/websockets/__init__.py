# Socket.IO handlers; imported by parallax/__init__.py for registration

import os

os.environ.setdefault("ENVIRONMENT", "CI")

import os

# Force production env if not set explicitly
os.environ.setdefault("ENV", "production")

from mandir_forms import create_app  # noqa: E402

app = create_app()

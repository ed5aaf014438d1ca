"""Identity the CLI acts under."""

from atelier.application.auth import ADMIN_ROLE, Principal

# Whoever can run the CLI on the host already has the data files.
OPERATOR = Principal(user_id="cli", role=ADMIN_ROLE)

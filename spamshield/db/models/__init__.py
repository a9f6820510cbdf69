from spamshield.db.models.profile import Profile  # noqa: F401
from spamshield.db.models.scan import Scan  # noqa: F401

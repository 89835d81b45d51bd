"""Runtime utilities

Functions:
    running_locally() -> bool:
        True if the handler is running on a developer machine, False otherwise.

Example:
    >>> from linkshortener.utils.runtime import running_locally
    >>> os.environ['APP_ENV'] = 'local'
    >>> running_locally()
    True
    >>> os.environ['APP_ENV'] = 'dev'
    >>> running_locally()
    False
"""

import os

from linkshortener.constants import ENV


def running_locally() -> bool:
    """Check if the handler is running locally (APP_ENV=local or via sam local invoke)

    An unset APP_ENV counts as deployed, so guarantee_500_response keeps
    answering 500 when the environment isn't configured.
    """
    env = os.getenv(ENV.App.APP_ENV, '').lower()
    return env == 'local' or os.getenv(ENV.App.AWS_SAM_LOCAL) == 'true'

__author__ = "formulaterms developers"
__author_email__ = "formulaterms@users.noreply.github.com"
__version__ = "0.1.0"
__version_tuple__ = (0, 1, 0)

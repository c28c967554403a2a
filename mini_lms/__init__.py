# This file makes the 'mini_lms' directory a Python package.

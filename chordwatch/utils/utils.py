import os
import sys


def resource_path(relative_path):
    """Returns the absolute path to a package resource (handles PyInstaller's _MEIPASS)"""
    package_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    base_path = getattr(sys, '_MEIPASS', package_dir)
    return os.path.join(base_path, relative_path)

"""
Source-Tree Launcher
====================
Runs the barometer demo straight from a checkout, without `pip install`.

The 'src' directory is put in front of sys.path so `import barometer`
resolves to the working copy.

Usage:
    $ python run.py             # scripted Torricelli run, then show the scene
    $ python run.py --no-plot   # log only
"""
import os
import sys

SRC_DIR: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
sys.path.insert(0, SRC_DIR)

from barometer.main import main

if __name__ == "__main__":
    main(show_plot="--no-plot" not in sys.argv[1:])

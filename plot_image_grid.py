#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Arrange images in a labeled grid and save the result.
"""

# local repo modules
import image_grid_plotter as igp
import image_grid_plotter.cli


if __name__ == "__main__":
	igp.cli.main()

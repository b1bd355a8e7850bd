"""
Apps
====

Example applications built on the client.

    - snake: a snake steered with the arrow keys
"""

"""
Client side of the explorer: state, favorites storage, the proxy API client,
the controller that ties them together, and text renderers.
"""

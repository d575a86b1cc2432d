"""
The CONTROLLER layer holds the physics (fluid state updater, pressure probe)
and the session logic that drives it tick by tick.
"""

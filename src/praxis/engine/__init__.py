"""
Engine - manifest session, layout projection, and the dispatch
state machine.
"""

"""
                        TabletMenu

Digital menu platform for a restaurant chain: a REST API over a relational
store, the ordering engine and branch visibility rules behind it, and the
client-side sync layer that tablets and the back-office use to mirror it.
"""

__version__ = "1.0.0"

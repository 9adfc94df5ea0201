"""
The stateful use cases of the system, which coordinate changes across models.
"""

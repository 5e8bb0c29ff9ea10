"""Blood pressure health client.

Records blood pressure and heart rate readings in an authorization-gated
health store and reads them back as ``Reading`` values.
"""

__version__ = "1.0.0"

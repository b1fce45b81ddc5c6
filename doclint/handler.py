"""
AWS Lambda entry point - serves the doclint API through Mangum.
"""

from mangum import Mangum

from doclint.main import app

handler = Mangum(app, lifespan="off")

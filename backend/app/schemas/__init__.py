"""
Tourlist Backend - Pydantic Request/Response Schemas
=====================================================

What:  The JSON contract of the API, separate from the ORM models.
How:   Every schema derives from ApiModel: camelCase keys on the wire,
       snake_case attributes in Python, built from ORM rows via from_attributes.
"""

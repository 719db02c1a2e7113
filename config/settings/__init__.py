"""Settings package for eRents.

`base` holds the configuration shared by every environment; `dev`,
`prod` and `test` extend it with environment specific overrides.
"""

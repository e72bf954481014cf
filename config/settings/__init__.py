"""Settings package for the facility scheduling service.

`base.py` holds the configuration shared by every environment, including
the FACILITY_SCHEDULING block read by the scheduling engine. `dev.py` and
`prod.py` extend it with environment specific overrides.
"""

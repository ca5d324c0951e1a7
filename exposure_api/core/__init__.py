"""
Exposure Core

Pure classification, insight and longitudinal logic. No I/O here apart
from the ingestion subpackage, which loads snapshots for the service layer.
"""

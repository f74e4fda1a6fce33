# Unversioned infrastructure routes; the API itself lives in v1/
from . import prometheus as prometheus

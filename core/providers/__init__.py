"""External generation providers.

Each provider lives in its own subpackage; ``core.providers.replicate`` holds
the prediction client, model catalog, settings cache, submitter and poller
used by the video generation feature.
"""

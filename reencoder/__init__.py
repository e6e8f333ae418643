"""
Media Re-encoder.

Re-encodes every supported media file in a folder into a `reencoded`
subfolder using external encoders (SVT-AV1 through FFmpeg for video, JPEG XL
for images) and scores each result against its source with VMAF.

Layout:
    config/    constants and user overrides loaded from `config.user.yaml`.
    domain/    data models and exceptions.
    services/  classifier, encoder invoker, quality validator, reporter and
               the small collaborators used by the web layer.
    pipeline/  the batch orchestrator.
    utils/     process execution, tool lookup and formatting helpers.
    web/       the Flask service.
"""

__version__ = "1.0.0"

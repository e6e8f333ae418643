"""
Configuration settings for media classification and external tool invocation.

Every external command is kept here as a template: a list of argument strings
in which `{placeholders}` are substituted at run time. Keeping them as data
lets the same pipeline drive a different encoder by editing only this file.

Placeholders:
    {input}      source media file.
    {output}     encoded file written into the output folder.
    {distorted}  file being scored (encoded video or decoded image).
    {reference}  original source file the score is measured against.
"""
import re

# ======================================================================================
# File Identification
# ======================================================================================

VIDEO_EXTENSIONS = (".mp4", ".mkv", ".avi", ".mov")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")

# Every video is re-encoded into a Matroska container and every image into JPEG XL.
VIDEO_OUTPUT_EXTENSION = ".mkv"
IMAGE_OUTPUT_EXTENSION = ".jxl"


# ======================================================================================
# Encoder Parameters
# ======================================================================================

VIDEO_ENCODER = "libsvtav1"
VIDEO_CRF = 28
VIDEO_PRESET = 9

IMAGE_DISTANCE = 1.0
IMAGE_EFFORT = 7

# `-y` lets a re-run overwrite the previous output instead of stopping at
# ffmpeg's interactive overwrite prompt.
VIDEO_ENCODE_TEMPLATE = [
    "ffmpeg", "-y", "-i", "{input}",
    "-c:v", VIDEO_ENCODER, "-crf", str(VIDEO_CRF), "-preset", str(VIDEO_PRESET),
    "-c:a", "copy",
    "{output}",
]

IMAGE_ENCODE_TEMPLATE = [
    "cjxl", "{input}", "{output}",
    "-d", str(IMAGE_DISTANCE), "--lossless_jpeg=0", f"--effort={IMAGE_EFFORT}",
]


# ======================================================================================
# Quality Validation
# ======================================================================================

# Decodes a JPEG XL file back into a PNG so the scorer can read it.
IMAGE_DECODE_TEMPLATE = ["djxl", "{input}", "{output}"]

# libvmaf takes the distorted stream first and the reference second.
VMAF_TEMPLATE = [
    "ffmpeg", "-i", "{distorted}", "-i", "{reference}",
    "-lavfi", "libvmaf", "-f", "null", "-",
]

# Suffix of the temporary PNG written next to the encoded image during validation.
DECODED_IMAGE_SUFFIX = "_decoded.png"

# libvmaf prints e.g. "[Parsed_libvmaf_0 @ 0x...] VMAF score: 95.123456" on stderr.
VMAF_SCORE_PATTERN = re.compile(r"VMAF score: ([\d.]+)")

# Arguments used to ask each tool for its version at start-up.
TOOL_VERSION_ARGS = {
    "ffmpeg": ["-version"],
    "cjxl": ["--version"],
    "djxl": ["--version"],
}

[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tftpkit"
version = "0.1.0"
description = "Building blocks for a TFTP service: MD5, hex dumps, message queues, framed TCP, a challenge handshake, ICMP ping, INI settings, directory listings and logging"
requires-python = ">=3.10"
dependencies = []
keywords = ["tftp", "tcp", "udp", "icmp", "ping", "md5", "hexdump", "ini", "logging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: File Transfer Protocol (FTP)",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tftpkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

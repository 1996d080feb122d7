from setuptools import find_packages, setup

# Flat layout: each top-level package is listed explicitly so tests and
# build leftovers never end up in the distribution.

package_list = find_packages(
  include=[
    "entrypoints",
    "entrypoints.*",
    "os_interfaces",
    "os_interfaces.*",
    "notification",
    "notification.*",
    "notification_schedule",
    "notification_schedule.*",
  ]
)

setup(
  name="localnotify",
  version="0.1.0",
  description="Schedule and cancel local notifications on Linux and Android",
  python_requires=">=3.11",
  packages=package_list,
  include_package_data=True,
  install_requires=[
    "pydantic>=2",
    "pyyaml",
    "python-dotenv",
    "platformdirs",
  ],
  extras_require={
    "android": ["pyjnius", "cython==3.0.12", "buildozer"],
    "linux": ["desktop-notifier>=5", "pystemd"],
    "dev": ["pytest", "pytest-asyncio", "pytest-cov"],
  },
  entry_points={
    "console_scripts": [
      "localnotify-schedule=notification_schedule.main:main",
      "localnotify-show=notification.main:run",
    ],
  },
)

from .step_10_install_prereqs import InstallPrerequisitesStep
from .step_20_fetch_project import FetchProjectStep
from .step_30_configure_project import ConfigureProjectStep
from .step_40_install_dependencies import InstallDependenciesStep
from .step_50_create_launcher import CreateLauncherStep
from .step_60_launch_app import LaunchApplicationStep

__all__ = [
    "InstallPrerequisitesStep",
    "FetchProjectStep",
    "ConfigureProjectStep",
    "InstallDependenciesStep",
    "CreateLauncherStep",
    "LaunchApplicationStep",
]

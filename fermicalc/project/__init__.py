''' Project Components manage the calculations, including save/load of configuration '''

from .project import Project
from .proj_estimate import ProjectEstimate

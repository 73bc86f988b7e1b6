'''
    ---------------------------------------------------------------------------
    OpenCap processing: errorsPredSim.py
    ---------------------------------------------------------------------------
    Copyright 2022 Stanford University and the Authors

    Author(s): Antoine Falisse, Scott Uhlrich

    Licensed under the Apache License, Version 2.0 (the "License"); you may not
    use this file except in compliance with the License. You may obtain a copy
    of the License at http://www.apache.org/licenses/LICENSE-2.0
    Unless required by applicable law or agreed to in writing, software
    distributed under the License is distributed on an "AS IS" BASIS,
    WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
    See the License for the specific language governing permissions and
    limitations under the License.

    Errors raised while deriving bounds and scaling factors. They all derive
    from ValueError: every one of them is caused by invalid inputs, none of
    them can be recovered from by retrying.
'''

class PreconditionViolation(ValueError):
    """Reference kinematics unusable for spline fitting (too few samples,
    non-increasing time, non-finite values)."""

class ConfigurationMismatch(ValueError):
    """Coordinate, muscle, or joint-group name not resolvable against the
    model descriptor or the reference kinematics."""

class DegenerateRange(ValueError):
    """Zero-width bound pair at zero feeding the scaling stage, raised only
    when strict scaling is requested."""

class InvalidBounds(ValueError):
    """Lower bound above upper bound after a pipeline stage."""

class InvalidSettings(ValueError):
    """Missing or ill-typed entry in the settings."""

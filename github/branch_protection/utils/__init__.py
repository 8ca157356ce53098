#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""Branch-protection required-check utilities.

Modules
-------
models                Data classes (CheckEntry, PullRequestRef, BranchProtection, ProtectionUpdate).
reconcile             Pure merge of fresh CI checks into an existing protection config.
canonical             Canonical JSON form and unified diff of protection documents.
protection_payload    Read-shape (GET) to write-shape (PUT) mapping.
gh_actions            ``gh api`` calls for PRs, workflow runs, jobs and branch protection.
required_checks_sync  End-to-end resolve → collect → reconcile → preview/apply pipeline.
"""

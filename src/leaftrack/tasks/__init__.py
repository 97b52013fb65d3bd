"""
Task subsystem.

Components:
- task_models.py: per-node attributes (TaskAttr, TaskStatus)
- task_tree.py: arena-backed task tree and Task handles
- leaf_extractor.py: actionable leaf extraction
- task_codec.py: task record / YAML (de)serialization
- task_repository.py: project.yaml-backed repository of project trees
"""

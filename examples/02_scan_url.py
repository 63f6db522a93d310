from phish_content_analyzer.collaborators.url_reputation import HeuristicUrlReputation
from phish_content_analyzer.orchestrator.capabilities import default_capability_registry

registry = default_capability_registry(HeuristicUrlReputation())
scan = registry.get("scanURL")
print(registry.export())
print(scan.invoke(**scan.parse_arguments('{"url": "http://192.0.2.10/verify-account"}')))

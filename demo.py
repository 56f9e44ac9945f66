from didv import VerificationRegistry, HostRuntime, Keypair, sign_call, setup_logging
from didv.utils.hashing import hash_string
import os

# Clean up previous demo db if exists
if os.path.exists("demo.db"):
    os.remove("demo.db")

setup_logging(log_level="WARNING")

print("--- DIDV Live Demo ---")

# 1. Create registry owned by the deployer
owner = Keypair.generate()
registry = VerificationRegistry("demo.db", creator=owner.get_account())
host = HostRuntime(registry)
print(f"[+] Registry created, owner {registry.owner[:8]}...")

# 2. Owner adds a verifier
verifier = Keypair.generate()
host.execute(sign_call(owner, "add_verifier", {'account': verifier.get_account()}))
print(f"[+] Verifier added: {verifier.get_account()[:8]}...")

# 3. Alice submits her identity
alice = Keypair.generate()
proof = hash_string("Alice|30|D1")
host.execute(sign_call(alice, "submit_identity", {
    'name': "Alice",
    'age': 30,
    'document_id': "D1",
    'proof_hash': proof,
}))
print(f"[+] Alice submitted, verified: {registry.is_verified(alice.get_account())}")

# 4. Verifier verifies with the matching proof
host.execute(sign_call(verifier, "verify_identity", {
    'target_account': alice.get_account(),
    'proof_hash': proof,
}))
print(f"[+] Alice verified: {registry.is_verified(alice.get_account())}")

# 5. Inspect the event log
for event in registry.get_events():
    print(f"    - {event.kind} {event.account[:8]}...")
print(f"[+] Event log intact: {registry.verify_event_integrity()}")

registry.close()
if os.path.exists("demo.db"):
    os.remove("demo.db")
print("--- Demo Complete ---")

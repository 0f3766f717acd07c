import logging

import pytest

from conftest import FakeLedger, decode_call, selector
from defi_client.actions import Action, ActionBatch, Approval
from defi_client.approvals import ApprovalInjector
from defi_client.errors import InsufficientFunds, LedgerIOError
from defi_client.registry import Coin, Handler

DAI = "0x6b175474e89094c44da98b954eedeac495271d0f"
USDC = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
HANDLER = "0x58a21cfcee675d65d577b251668f7dc46ea9c3a0"


def _batch_needing(*approvals, value=0):
    return ActionBatch.of(Action(HANDLER, b"\x12\x34\x56\x78", value, tuple(approvals)))


class BrokenLedger(FakeLedger):
    def balance_of(self, token, owner):
        raise LedgerIOError("rpc down")


class TestApprovalInjector:

    @pytest.fixture
    def injector_for(self, registry, account):
        def _make(balances, strict=False):
            ledger = FakeLedger(balances=balances)
            return ApprovalInjector(ledger, registry, account.address, strict=strict), ledger
        return _make

    def test_requested_below_balance_is_kept(self, injector_for):
        injector, _ = injector_for({DAI: 1_000})

        resolved = injector.resolve(_batch_needing(Approval(DAI, 100)))

        assert [a.amount for a in resolved] == [100]

    def test_requested_above_balance_is_clamped(self, injector_for):
        injector, _ = injector_for({DAI: 50})

        resolved = injector.resolve(_batch_needing(Approval(DAI, 100)))

        assert [a.amount for a in resolved] == [50]

    def test_requested_equal_to_balance(self, injector_for):
        injector, _ = injector_for({DAI: 100})

        resolved = injector.resolve(_batch_needing(Approval(DAI, 100)))

        assert [a.amount for a in resolved] == [100]

    def test_balances_read_for_caller_in_batch_order(self, injector_for, account):
        injector, ledger = injector_for({DAI: 10, USDC: 10})
        batch = _batch_needing(Approval(USDC, 1)).add(_batch_needing(Approval(DAI, 2)))

        injector.resolve(batch)

        assert [t.lower() for t, _ in ledger.balance_reads] == [USDC, DAI]
        assert all(owner == account.address for _, owner in ledger.balance_reads)

    def test_inject_prepends_funds_action(self, injector_for, registry):
        injector, _ = injector_for({DAI: 50, USDC: 500})
        batch = _batch_needing(Approval(DAI, 100), Approval(USDC, 200), value=3)

        combined = injector.inject(batch)

        assert len(combined.targets) == 2
        assert combined.targets[0] == registry.handler(Handler.FUNDS)
        assert combined.targets[1:] == batch.combine().targets
        assert combined.payloads[1:] == batch.combine().payloads
        assert combined.value == 3

        inject_data = combined.payloads[0]
        assert inject_data[:4] == selector("inject(address[],uint256[])")
        tokens, amounts = decode_call(["address[]", "uint256[]"], inject_data)
        assert [t.lower() for t in tokens] == [DAI, USDC]
        assert list(amounts) == [50, 200]

    def test_no_approvals_leaves_batch_unchanged(self, injector_for):
        injector, ledger = injector_for({})
        batch = _batch_needing(value=1)

        combined = injector.inject(batch)

        assert combined == batch.combine()
        assert ledger.balance_reads == []

    def test_strict_policy_raises_on_shortfall(self, injector_for):
        injector, _ = injector_for({DAI: 50}, strict=True)

        with pytest.raises(InsufficientFunds) as exc_info:
            injector.inject(_batch_needing(Approval(DAI, 100)))

        assert exc_info.value.requested == 100
        assert exc_info.value.balance == 50

    def test_strict_policy_allows_exact_balance(self, injector_for):
        injector, _ = injector_for({DAI: 100}, strict=True)

        resolved = injector.resolve(_batch_needing(Approval(DAI, 100)))

        assert resolved[0].amount == 100

    def test_balance_read_failure_propagates(self, registry, account):
        injector = ApprovalInjector(BrokenLedger(), registry, account.address)

        with pytest.raises(LedgerIOError):
            injector.inject(_batch_needing(Approval(DAI, 1)))

    def test_supply_funds_style_token_lookup(self, injector_for, registry):
        injector, _ = injector_for({registry.token(Coin.DAI): 7})

        resolved = injector.resolve(_batch_needing(Approval(registry.token(Coin.DAI), 9)))

        assert resolved == [Approval(DAI, 7)]

    def test_repeated_token_warns(self, injector_for, caplog):
        injector, _ = injector_for({DAI: 1_000})
        batch = _batch_needing(Approval(DAI, 10)).add(_batch_needing(Approval(DAI, 20)))

        with caplog.at_level(logging.WARNING, logger='defi_client'):
            resolved = injector.resolve(batch)

        # 토큰별 합산 없이 요청마다 개별 처리
        assert [a.amount for a in resolved] == [10, 20]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert resolved[0].token in warnings[0].getMessage()

    def test_distinct_tokens_do_not_warn(self, injector_for, caplog):
        injector, _ = injector_for({DAI: 1_000, USDC: 1_000})
        batch = _batch_needing(Approval(DAI, 10), Approval(USDC, 20))

        with caplog.at_level(logging.WARNING, logger='defi_client'):
            injector.resolve(batch)

        assert [r for r in caplog.records if r.levelno == logging.WARNING] == []
